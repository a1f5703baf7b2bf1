"""StoryLingo: bilingual story reader with an AI translation assistant."""

__version__ = "0.1.0"
