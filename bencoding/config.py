"""
Settings for the bencoding command line tool.
Read from the environment, with fallback to defaults. The command line entry
point loads a .env file into the environment first.
"""
import os
from dataclasses import dataclass

# Width of the wrapped buffer lines in decode diagnostics
WRAP_WIDTH = 80

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    # Text encoding used to turn command line input into bytes (and back)
    encoding: str = "utf-8"
    wrap_width: int = WRAP_WIDTH
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            encoding=os.getenv("BENCODING_ENCODING", "utf-8"),
            wrap_width=int(os.getenv("BENCODING_WRAP_WIDTH", str(WRAP_WIDTH))),
            log_level=os.getenv("BENCODING_LOG_LEVEL", "WARNING").upper(),
        )
