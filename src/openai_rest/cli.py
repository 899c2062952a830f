#!/usr/bin/env python3
"""
Command-line access to the OpenAI REST API.

Select one category and one operation, and pass the request with --data.
Body operations read --data as a JSON file; operations on a single job,
file or model take the identifier itself as --data.

Usage:
    openai-rest --chat --create --data request.json
    openai-rest --models --retrieve --data gpt-4o-mini
    openai-rest --audio --speech --data speech.json --output out.mp3
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
from pydantic import ValidationError

from .client import OpenAIClient
from .config import ClientConfig
from .errors import APIStatusError, InvalidRequestError, LocalFileError, OpenAIError, TransportError
from .multipart import read_file


logger = logging.getLogger(__name__)

DEFAULT_SPEECH_OUTPUT = "output/result.mp3"

EXIT_OK = 0
EXIT_TRANSPORT_ERROR = 1
EXIT_HTTP_ERROR = 3
EXIT_LOCAL_FILE_ERROR = 4
EXIT_BAD_DATA = 5
EXIT_BAD_CONFIG = 6
EXIT_UNEXPECTED_ERROR = 7

CATEGORIES = [
    ("audio", "turn audio into text or text into audio."),
    ("chat", "given a list of messages comprising a conversation, the model will return a response."),
    ("embedding", "get a vector representation of a given input."),
    ("fine-tuning", "manage fine-tuning jobs to tailor a model to your specific training data."),
    ("files", "upload and manage documents used by other endpoints."),
    ("images", "given a prompt and/or an input image, the model will generate a new image."),
    ("models", "list and describe the various models available in the API."),
    ("moderations", "classify whether input text is potentially harmful."),
]

OPERATIONS = [
    ("speech", "[--audio] generates audio from the input text."),
    ("transcription", "[--audio] transcribes audio into the input language."),
    ("translation", "[--audio] translates audio into english."),
    ("create", "[--chat|--embedding|--fine-tuning|--images|--moderations] create a resource."),
    ("list", "[--fine-tuning|--files|--models] list resources."),
    ("events", "[--fine-tuning] get status updates for a fine-tuning job."),
    ("checkpoints", "[--fine-tuning] list checkpoints for a fine-tuning job."),
    ("retrieve", "[--fine-tuning|--files|--models] get one resource by id."),
    ("cancel", "[--fine-tuning] immediately cancel a fine-tuning job."),
    ("upload", "[--files] upload a file that can be used across various endpoints."),
    ("delete", "[--files|--models] delete a file or a fine-tuned model."),
    ("content", "[--files] return the contents of a file."),
    ("edit", "[--images] create an edited image given an original image and a prompt."),
    ("variation", "[--images] create a variation of a given image."),
]

# How an operation consumes --data
BODY = "body"
IDENTIFIER = "identifier"
NONE = "none"


def _route_table(client: OpenAIClient) -> Dict[Tuple[str, str], Tuple[str, Callable[..., Any]]]:
    return {
        ("audio", "transcription"): (BODY, client.audio.transcription),
        ("audio", "translation"): (BODY, client.audio.translation),
        ("chat", "create"): (BODY, client.chat.create),
        ("embedding", "create"): (BODY, client.embeddings.create),
        ("fine-tuning", "create"): (BODY, client.fine_tuning.create),
        ("fine-tuning", "list"): (NONE, client.fine_tuning.list),
        ("fine-tuning", "events"): (IDENTIFIER, client.fine_tuning.events),
        ("fine-tuning", "checkpoints"): (IDENTIFIER, client.fine_tuning.checkpoints),
        ("fine-tuning", "retrieve"): (IDENTIFIER, client.fine_tuning.retrieve),
        ("fine-tuning", "cancel"): (IDENTIFIER, client.fine_tuning.cancel),
        ("files", "upload"): (BODY, client.files.upload),
        ("files", "list"): (NONE, client.files.list),
        ("files", "retrieve"): (IDENTIFIER, client.files.retrieve),
        ("files", "delete"): (IDENTIFIER, client.files.delete),
        ("files", "content"): (IDENTIFIER, client.files.content),
        ("images", "create"): (BODY, client.images.create),
        ("images", "edit"): (BODY, client.images.edit),
        ("images", "variation"): (BODY, client.images.variation),
        ("models", "list"): (NONE, client.models.list),
        ("models", "retrieve"): (IDENTIFIER, client.models.retrieve),
        ("models", "delete"): (IDENTIFIER, client.models.delete),
        ("moderations", "create"): (BODY, client.moderations.create),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openai-rest",
        description="Call the OpenAI REST API from the command line",
    )

    categories = parser.add_argument_group("categories", "select exactly one")
    for name, help_text in CATEGORIES:
        flags = [f"--{name}"]
        if name in ("chat", "models"):
            flags.append(f"-{name[0]}")
        categories.add_argument(
            *flags,
            dest="categories",
            action="append_const",
            const=name,
            help=help_text,
        )

    operations = parser.add_argument_group("operations", "select exactly one")
    for name, help_text in OPERATIONS:
        operations.add_argument(
            f"--{name}",
            dest="operations",
            action="append_const",
            const=name,
            help=help_text,
        )

    parser.add_argument("--data", "-d", help="request body file, or the resource id")
    parser.add_argument("--base-uri", default=None, help="scheme://host:port (default: $OPENAI_BASE_URL or https://api.openai.com)")
    parser.add_argument("--token", default=None, help="bearer token (default: $OPENAI_API_KEY)")
    parser.add_argument("--proxy", default=None, help="host:port (default: $OPENAI_PROXY)")
    parser.add_argument(
        "--output",
        "-o",
        default=DEFAULT_SPEECH_OUTPUT,
        help=f"where --speech writes audio (default: {DEFAULT_SPEECH_OUTPUT})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="log every request and response")

    return parser


def load_request(path: str) -> Dict[str, Any]:
    """Read and parse a JSON request file, echoing it to stdout."""
    data = read_file(path).decode("utf-8")
    print(f"data: \n{data}")
    return json.loads(data)


def run(args: argparse.Namespace, client: OpenAIClient) -> bool:
    """Dispatch one category/operation pair. Returns False when nothing matched."""
    if (args.category, args.operation) == ("audio", "speech"):
        if args.data is None:
            return False
        audio = client.audio.speech(load_request(args.data))
        output = Path(args.output)
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_bytes(audio)
        except OSError as e:
            raise LocalFileError(str(output), e.strerror or str(e)) from e
        print(f"{output} ok!")
        return True

    route = _route_table(client).get((args.category, args.operation))
    if route is None:
        return False
    logger.debug("Dispatching --%s --%s", args.category, args.operation)

    kind, call = route
    if kind == NONE:
        response = call()
    elif args.data is None:
        return False
    elif kind == IDENTIFIER:
        response = call(args.data)
    else:
        response = call(load_request(args.data))

    print(json.dumps(response, ensure_ascii=False))
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    categories = set(args.categories or [])
    operations = set(args.operations or [])
    if len(categories) != 1 or len(operations) != 1:
        parser.print_help()
        return EXIT_OK
    args.category = categories.pop()
    args.operation = operations.pop()

    try:
        config = ClientConfig.from_env(
            base_uri=args.base_uri,
            token=args.token,
            proxy=args.proxy,
            verbose=args.verbose,
        )
        client = OpenAIClient.from_config(config)
    except (ValidationError, httpx.InvalidURL) as e:
        print(f"exception: {e}")
        return EXIT_BAD_CONFIG

    try:
        with client:
            handled = run(args, client)
    except TransportError as e:
        print(f"exception: {e}")
        return EXIT_TRANSPORT_ERROR
    except APIStatusError as e:
        print(f"exception: {e}")
        return EXIT_HTTP_ERROR
    except LocalFileError as e:
        print(f"exception: {e}")
        return EXIT_LOCAL_FILE_ERROR
    except (InvalidRequestError, ValueError) as e:
        print(f"exception: invalid --data: {e}")
        return EXIT_BAD_DATA
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(f"exception: {e}")
        return EXIT_UNEXPECTED_ERROR

    if not handled:
        parser.print_help()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
