"""
Game Text - Localization database for game text lines and subtitles.

Loads per-language source definitions for:
- Text banks (numeric line id -> string) grouped by text group
- Cutscene and hint subtitle scenes with frame-timed lines
- Subtitle scene grouping used by the subtitle editor and asset builders

Sources may be written in the s-expression DSL or in JSON.
"""

__version__ = "0.1.0"
