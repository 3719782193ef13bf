"""Import, export and merge of arc databases."""

from mla.sync.merge import MergeResult, merge, merge_roots

__all__ = ["MergeResult", "merge", "merge_roots"]
