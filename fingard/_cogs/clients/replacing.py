from fingard._cogs.clients import api, auth
from fingard._cogs.configs import configuration
from fingard._cogs.helpers import typedefs
from fingard._cogs.structs import bodies, references


async def replace_obj(
        *,
        context: auth.APIContext,
        settings: configuration.Settings,
        resource: references.Resource,
        namespace: references.Namespace,
        name: str,
        body: bodies.RawBody,
        logger: typedefs.Logger,
) -> bodies.RawBody:
    """
    Replace one individual object of a specific resource type with a new body.

    The replacement is the whole document, not a partial patch. If the body
    carries ``metadata.resourceVersion``, the API server checks it against
    the stored object and fails with HTTP 409 if the object has changed
    since that version was read -- i.e. this is an optimistic lock.

    Returns the stored body as reported by the server (with a new version).
    """
    rsp: bodies.RawBody = await api.put(
        url=resource.get_url(namespace=namespace, name=name),
        headers={'Content-Type': 'application/json'},
        payload=body,
        context=context,
        settings=settings,
        logger=logger,
    )
    return rsp
