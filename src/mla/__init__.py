"""mla - Manga / Light Novel / Anime arc linker."""

__version__ = "0.3.0"
