"""
Request payload validation.

PayloadValidator walks a JSON body field by field, converts wire names
(camelCase) into model attributes (snake_case) and collects EVERY violated
field before failing, so one 400 response lists all problems:

    v = PayloadValidator(data)
    v.string("title", required=True, min_length=1, max_length=200)
    v.enum("status", TASK_STATUSES, default="PENDING")
    v.datetime("dueDate", "due_date")
    cleaned = v.validate()      # raises ValidationError

With ``partial=True`` (PUT) absent keys are skipped entirely, required
fields may be omitted but not nulled, and an explicit ``null`` clears an
optional field.
"""

from urllib.parse import urlparse

from gradtrack.core.exceptions import ValidationError
from gradtrack.utils.helpers import parse_datetime

_MISSING = object()


def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class PayloadValidator:

    def __init__(self, data, *, partial=False, prefix=""):
        self.partial = partial
        self.prefix = prefix
        self.errors: list[dict] = []
        self.cleaned: dict = {}
        if not isinstance(data, dict):
            self.add_error("body", "Request body must be a JSON object")
            data = {}
        self.data = data

    def add_error(self, field, message):
        self.errors.append({"field": f"{self.prefix}{field}", "message": message})

    def _take(self, field, required, default, nullable=True):
        """Return the raw value for ``field`` or _MISSING when nothing should be written."""
        if field not in self.data:
            if self.partial:
                return _MISSING
            if required:
                self.add_error(field, f"{field} is required")
                return _MISSING
            return default
        value = self.data[field]
        if value is None and (required or not nullable):
            self.add_error(field, f"{field} is required")
            return _MISSING
        return value

    # ── Field types ──────────────────────────────────────────────────────

    def string(self, field, attr=None, *, required=False, min_length=None,
               max_length=None, default=_MISSING, nullable=True):
        value = self._take(field, required, default, nullable)
        if value is _MISSING:
            return
        if value is not None:
            if not isinstance(value, str):
                self.add_error(field, f"{field} must be a string")
                return
            value = value.strip()
            if min_length is not None and len(value) < min_length:
                if min_length == 1:
                    self.add_error(field, f"{field} is required")
                else:
                    self.add_error(field, f"{field} must be at least {min_length} characters")
                return
            if max_length is not None and len(value) > max_length:
                self.add_error(field, f"{field} must be at most {max_length} characters")
                return
        self.cleaned[attr or field] = value

    def enum(self, field, choices, attr=None, *, required=False, default=_MISSING,
             nullable=True):
        value = self._take(field, required, default, nullable)
        if value is _MISSING:
            return
        if value is not None:
            normalized = str(value).upper() if isinstance(value, str) else value
            if normalized not in choices:
                self.add_error(field, f"{field} must be one of: {', '.join(choices)}")
                return
            value = normalized
        self.cleaned[attr or field] = value

    def url(self, field, attr=None, *, max_length=1000):
        value = self._take(field, False, _MISSING)
        if value is _MISSING:
            return
        if value == "":
            value = None
        if value is not None:
            if not isinstance(value, str) or not _is_url(value.strip()):
                self.add_error(field, f"{field} must be a valid URL")
                return
            value = value.strip()
            if len(value) > max_length:
                self.add_error(field, f"{field} must be at most {max_length} characters")
                return
        self.cleaned[attr or field] = value

    def datetime(self, field, attr=None, *, required=False):
        value = self._take(field, required, _MISSING)
        if value is _MISSING:
            return
        if value == "":
            if required:
                self.add_error(field, f"{field} is required")
                return
            value = None
        try:
            parsed = parse_datetime(value)
        except ValueError:
            self.add_error(field, f"{field} must be an ISO-8601 date")
            return
        self.cleaned[attr or field] = parsed

    def boolean(self, field, attr=None, *, default=_MISSING):
        value = self._take(field, False, default)
        if value is _MISSING:
            return
        if not isinstance(value, bool):
            self.add_error(field, f"{field} must be a boolean")
            return
        self.cleaned[attr or field] = value

    def integer(self, field, attr=None):
        """Optional integer reference (e.g. ``universityId``); null clears it."""
        value = self._take(field, False, _MISSING)
        if value is _MISSING:
            return
        if value == "":
            value = None
        if value is not None:
            if isinstance(value, bool):
                self.add_error(field, f"{field} must be an integer")
                return
            try:
                value = int(value)
            except (TypeError, ValueError):
                self.add_error(field, f"{field} must be an integer")
                return
        self.cleaned[attr or field] = value

    def nested_list(self, field, item_rules, attr=None):
        """Validate a list of objects with ``item_rules(validator)`` applied to each."""
        value = self._take(field, False, _MISSING)
        if value is _MISSING:
            return
        if value is None:
            value = []
        if not isinstance(value, list):
            self.add_error(field, f"{field} must be a list")
            return
        items = []
        for i, raw in enumerate(value):
            child = PayloadValidator(raw, prefix=f"{self.prefix}{field}[{i}].")
            item_rules(child)
            self.errors.extend(child.errors)
            items.append(child.cleaned)
        self.cleaned[attr or field] = items

    # ── Result ───────────────────────────────────────────────────────────

    def validate(self) -> dict:
        if self.errors:
            raise ValidationError("Validation failed", details=self.errors)
        return self.cleaned
