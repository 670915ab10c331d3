"""StoryMedia — companion video/audio generation for generated stories."""

__version__ = "0.1.0"
