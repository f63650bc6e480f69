"""Custom exceptions for karaoke_qc."""

class KaraokeQCError(Exception):
    """Base exception for karaoke_qc."""
    pass

class ConfigError(KaraokeQCError):
    """Invalid configuration value."""
    pass

class ValidationError(KaraokeQCError):
    """Invalid input parameters."""
    pass

class SongDataError(KaraokeQCError):
    """Error reading or parsing song data."""
    pass
