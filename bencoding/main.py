import json
import logging
import sys

from dotenv import find_dotenv, load_dotenv

from .config import LOG_FORMAT, Settings
from .diagnostics import render_invalid_block
from .encoding import bdecode, bencode
from .errors import BencodeError, InvalidBlock

logger = logging.getLogger(__name__)


def check_file(filename: str, encoding: str = "utf-8") -> str:
    with open(filename, "rb") as file:
        bencoded_content = file.read()

    content = bdecode(bencoded_content, encoding, raw=True)
    logger.info("Checked %s (%d bytes)", filename, len(bencoded_content))
    return type(content).__name__


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = settings or Settings.from_env()
    if len(argv) < 2:
        print("Usage: bencoding <decode|encode|check> <argument>", file=sys.stderr)
        return 2

    command, argument = argv[0], argv[1]

    try:
        match command:
            case "decode":
                decoded_value = bdecode(argument, settings.encoding)
                print(json.dumps(decoded_value))
            case "encode":
                value = json.loads(argument)
                print(bencode(value, settings.encoding))
            case "check":
                top_level_type = check_file(argument, settings.encoding)
                print(f"OK: {argument} holds a bencoded {top_level_type}")
            case _:
                raise NotImplementedError(f"Unknown command {command}")
    except InvalidBlock as error:
        logger.error("Could not %s %r: %s", command, argument, error.reason)
        print(render_invalid_block(error, settings.wrap_width), file=sys.stderr)
        return 1
    except (BencodeError, json.JSONDecodeError) as error:
        logger.error("Could not %s %r: %s", command, argument, error)
        print(error, file=sys.stderr)
        return 1

    return 0


def run():
    load_dotenv(find_dotenv(usecwd=True))
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    sys.exit(main(settings=settings))


if __name__ == "__main__":
    run()
