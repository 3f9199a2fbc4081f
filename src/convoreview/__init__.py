"""ConvoReview - conversation review with synchronized audio and transcript"""

__version__ = "0.1.0"
