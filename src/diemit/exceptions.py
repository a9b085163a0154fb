class DIEmitError(Exception):
    """Represent a base class for all diemit-specific failures.

    Catch this type when you want to handle any diemit error path without
    matching each concrete exception class individually.
    """


class DIEmitInvalidOptionsError(DIEmitError):
    """Signal invalid code emission options.

    Raised by ``EmitOptions`` when ``registry_name`` is not a usable Python
    identifier or ``digest_length`` falls outside the supported range.

    Typical fixes include passing a plain identifier such as ``"registry"`` and
    a digest length between 8 and 64 hex characters.
    """


class DIEmitEmptyProviderGroupError(DIEmitError):
    """Signal an attempt to build a provider group without members.

    Groups are created on first membership, so this error points at a defect in
    the caller that constructs ``ProviderGroup`` directly rather than at bad
    provider data.
    """


class DIEmitTemplateError(DIEmitError, ValueError):
    """Signal a malformed source template or missing template variable.

    Raised while compiling or rendering the snippets used to emit provider
    classes, factories and generated modules.
    """
