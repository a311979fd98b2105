"""Apache rewrite rules for running restmux behind a single entry script.

Every request that is not an existing file or directory is rewritten to the
entry script, with the original path passed in the reserved ``__url__`` query
key.
"""

import logging
from pathlib import Path

from restmux.errors import ConfigurationError
from restmux.inbound import RESERVED_URL_KEY

logger = logging.getLogger(__name__)

HTACCESS_FILENAME = ".htaccess"

_TEMPLATE = """\
<IfModule mod_rewrite.c>
    RewriteEngine On
    RewriteBase {rewrite_base}
    RewriteCond %{{REQUEST_FILENAME}} !-f
    RewriteCond %{{REQUEST_FILENAME}} !-d
    RewriteRule ^(.*)$ ./{entry_script}?{url_key}=$1 [QSA,L]
</IfModule>
"""


def render_htaccess(entry_script: str = "index.py", rewrite_base: str = "/") -> str:
    if not entry_script or "/" in entry_script:
        msg = f"entry_script must be a bare filename, provided {entry_script=}"
        raise ValueError(msg)
    if not rewrite_base.startswith("/"):
        msg = f"rewrite_base must start with '/', provided {rewrite_base=}"
        raise ValueError(msg)
    return _TEMPLATE.format(
        rewrite_base=rewrite_base,
        entry_script=entry_script,
        url_key=RESERVED_URL_KEY,
    )


def write_htaccess(
    directory: str | Path,
    *,
    entry_script: str = "index.py",
    rewrite_base: str = "/",
) -> Path:
    """Writes the rewrite rules to ``<directory>/.htaccess``, replacing any old one.

    Raises:
        ConfigurationError: the file could not be written.
    """
    content = render_htaccess(entry_script, rewrite_base)
    path = Path(directory) / HTACCESS_FILENAME
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        msg = f"could not write {path}: {e}"
        raise ConfigurationError(msg) from e
    logger.info("wrote rewrite rules for %s to %s", entry_script, path)
    return path
