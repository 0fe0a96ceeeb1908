"""FastAPI Backend for Crime Story Studio

This backend turns an optional topic prompt into a complete true crime
video content bundle (script, title, scenes, narration) and serves the
browser client that drives it.
"""

__version__ = "1.0.0"
