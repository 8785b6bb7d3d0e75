# type: ignore
import logging
import os


def init_testsuite_env():
    """Initialize testsuite environment."""
    # Set before the first import of spdxgen, the log configuration is read
    # at import time.
    os.environ["TZ"] = "UTC"
    os.environ["SPDXGEN_CONFIG"] = "/dev/null"
    if "SPDXGEN_ENABLE_FEATURE" in os.environ:
        del os.environ["SPDXGEN_ENABLE_FEATURE"]

    import spdxgen.log

    # Activate full debug logs
    spdxgen.log.activate(level=logging.DEBUG, spdxgen_debug=True)


init_testsuite_env()
