from .config import LoggingConfig as LoggingConfig, StreamType as StreamType
from .models import Entry as Entry, Log as Log, LogLevel as LogLevel
from .streams import Logger as Logger, LoggerStream as LoggerStream
