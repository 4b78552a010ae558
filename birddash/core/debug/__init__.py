from birddash.core.debug.debug_logger import DebugLogger, LoggerConfig

__all__ = ['DebugLogger', 'LoggerConfig']
