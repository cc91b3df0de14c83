from __future__ import annotations

import sys
from typing import Iterable, Optional

from helm_wrapper.config.loader import load_config
from helm_wrapper.core.errors import WrapperError
from helm_wrapper.core.logging import configure_logging, get_logger
from helm_wrapper.wrapper import HelmWrapper


LOGGER = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_BOOTSTRAP_FAILURE = 1


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entrypoint.

    helm-wrapper takes no options of its own: every argument is handed to
    helm untouched. Returns helm's exit code, or 1 if bootstrapping failed.
    """

    args = list(sys.argv[1:] if argv is None else argv)

    try:
        config = load_config()
    except WrapperError as e:
        configure_logging()
        return _fail(e)

    configure_logging(level=config.log_level)

    try:
        return HelmWrapper.from_config(config).run(args)
    except WrapperError as e:
        return _fail(e)


def _fail(error: WrapperError) -> int:
    LOGGER.debug("Bootstrap failed", exc_info=error)
    print(f"helm-wrapper: {error.describe()}", file=sys.stderr)
    return EXIT_BOOTSTRAP_FAILURE


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    raise SystemExit(main())
