"""lenticular — interlacing, tile planning and lens meshes for lenticular prints."""

__version__ = "0.1.0"
