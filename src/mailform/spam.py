"""Honeypot anti-spam check.

Honeypot fields are hidden from people by the presentation layer but get
filled in by naive form-filling bots, so any value in one marks the
submission as spam. In development a filled honeypot means the field is not
hidden, and raises HoneypotIntegrityFault instead.
"""

import logging
from typing import Any

from mailform.declarations.types import read_field
from mailform.errors import HoneypotIntegrityFault
from mailform.validation.validators import is_blank

logger = logging.getLogger(__name__)


class SpamGuard:
    """Evaluates the honeypot fields of a form.

    Attributes:
        development: Raise on a filled honeypot instead of reporting spam
    """

    def __init__(self, development: bool = False):
        self.development = development

    def is_spam(self, form: Any) -> bool:
        """Return True if any honeypot field holds a value.

        Honeypots are checked in declaration order and the first filled one
        decides.

        Raises:
            HoneypotIntegrityFault: In development mode, for a filled honeypot
        """
        for declaration in type(form).configuration().honeypots:
            if is_blank(read_field(form, declaration.name)):
                continue

            if self.development:
                raise HoneypotIntegrityFault(declaration.name)

            logger.debug(
                "%s honeypot '%s' is filled in", type(form).__name__, declaration.name
            )
            return True

        return False

    def not_spam(self, form: Any) -> bool:
        return not self.is_spam(form)
