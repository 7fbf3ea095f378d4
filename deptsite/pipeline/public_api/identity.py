"""Department identity resolution.

Maps the process-wide department code to the routable slug used by the
public API. The lookup is pure: no I/O and no exceptions, so an unset or
unknown code simply resolves to ``None`` ("department not configured").
"""

from __future__ import annotations

from typing import Mapping

from deptsite.config import DEPARTMENT_CODE_SLUGS


def department_slug_from_code(
    code: str | None, overrides: Mapping[str, str] | None = None
) -> str | None:
    """Return the slug for a department code, or ``None`` when unmapped.

    Parameters
    ----------
    code : str or None
        Department code as configured (case and surrounding whitespace are
        ignored).
    overrides : Mapping[str, str] or None, optional
        Extra code->slug entries that take precedence over the built-in
        table (see ``PublicApiConfig.slug_overrides``).

    Returns
    -------
    str or None
        The routable slug, or ``None`` for ``None``, blank or unknown codes.

    Examples
    --------
    >>> department_slug_from_code("cs")
    'cs'
    >>> department_slug_from_code("  CSE ")
    'cs'
    >>> department_slug_from_code("nope") is None
    True
    """
    if not isinstance(code, str):
        return None
    key = code.strip().upper()
    if not key:
        return None
    if overrides:
        slug = overrides.get(key)
        if slug:
            return slug
    return DEPARTMENT_CODE_SLUGS.get(key)
