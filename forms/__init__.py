from flask import request
from werkzeug.datastructures import MultiDict

from errors import ValidationError


def form_from_json(form_class, **kwargs):
    """Build a form from the JSON request body.

    Values are handed to WTForms as strings, the way a browser form would post
    them; nulls, empty strings and nested structures are left out so the
    field defaults apply.
    """
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    formdata = MultiDict({
        key: str(value) for key, value in payload.items()
        if value is not None and value != '' and not isinstance(value, (dict, list))
    })
    return form_class(formdata=formdata, **kwargs)


def validated(form):
    if not form.validate():
        field_name, messages = next(iter(form.errors.items()))
        label = getattr(form, field_name).label.text if hasattr(form, field_name) else field_name
        raise ValidationError(f'{label}: {messages[0]}')
    return form
