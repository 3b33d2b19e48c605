import logging
import os
import sys


class JAOPS:
    """Process-wide jaops defaults
    :param NAMESPACE: optional leading url segment that is stripped before parsing the resource path
    :param LOGLEVEL: loglevel configuration variable, values from logging module (0: trace, .. 50: critical)
    :param NOOP_STATUS: status code the hosts respond with when the pipeline writes nothing
    """

    # Configuration settings are stored as class variables
    NAMESPACE = ""
    LOGLEVEL = logging.WARNING
    NOOP_STATUS = 204
    BULK_STATUS = 200
    DEFAULT_PAGE_LIMIT = 250
    MAX_PAGE_LIMIT = 100000
    # the type of the resource that is identified by the bearer token
    USER_TYPE = "user"
    # when JWT_SECRET is set, bearer tokens are verified instead of only decoded
    JWT_SECRET = None
    JWT_ALGORITHMS = ["HS256"]

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        The webserver will catch stdout so we redirect eveything to sys.stderr
        """
        log = logging.getLogger(__name__)
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


#
# logging initialization
#
try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = JAOPS.init_logging(LOGLEVEL)
