"""Request body normalization.

Actions accept either an HTML form submission or a JSON body. Both are turned
into one plain mapping here so use cases only ever see a single input shape.
"""

from typing import Any, Dict, Iterable

from fastapi import HTTPException, Request, status

JSON_CONTENT_TYPE = "application/json"


def _nest(flat: Dict[str, Any]) -> Dict[str, Any]:
    """Expand dotted keys: ``{"location.city": "x"}`` -> ``{"location": {"city": "x"}}``"""
    nested: Dict[str, Any] = {}
    for key, value in flat.items():
        parts = key.split(".")
        target = nested
        for part in parts[:-1]:
            target = target.setdefault(part, {})
            if not isinstance(target, dict):
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail=f"Conflicting form fields for {key!r}",
                )
        target[parts[-1]] = value
    return nested


async def read_fields(
    request: Request,
    checkboxes: Iterable[str] = (),
    lists: Iterable[str] = (),
) -> Dict[str, Any]:
    """Read the request body into a mapping of field values.

    Form submissions: an unchecked checkbox is simply absent, so every name in
    ``checkboxes`` defaults to False; names in ``lists`` collect every value
    sent under that name; blank optional values are dropped.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(JSON_CONTENT_TYPE):
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body")
        if not isinstance(body, dict):
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Expected a JSON object")
        return body

    form = await request.form()
    list_fields = set(lists)
    flat: Dict[str, Any] = {}
    for key in form.keys():
        if key in list_fields:
            flat[key] = [value for value in form.getlist(key) if isinstance(value, str) and value.strip()]
            continue
        value = form.get(key)
        if isinstance(value, str) and value == "":
            continue
        flat[key] = value

    for name in checkboxes:
        flat.setdefault(name, False)
    for name in list_fields:
        flat.setdefault(name, [])

    return _nest(flat)
