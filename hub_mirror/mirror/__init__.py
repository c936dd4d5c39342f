"""
Mirror Pipeline: Copy multi-platform images to the destination namespace.

This package resolves destination names, inspects manifest lists, copies
each platform variant and republishes the combined manifest list.
"""
