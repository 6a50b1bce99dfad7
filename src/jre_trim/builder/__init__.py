"""Runtime image building with jlink."""

from .image import BuildState, RuntimeImageBuilder, build_image, delete_tree, directory_size

__all__ = ["BuildState", "RuntimeImageBuilder", "build_image", "delete_tree", "directory_size"]
