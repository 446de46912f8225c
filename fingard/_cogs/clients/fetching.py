from fingard._cogs.clients import api, auth
from fingard._cogs.configs import configuration
from fingard._cogs.helpers import typedefs
from fingard._cogs.structs import bodies, references


async def read_obj(
        *,
        context: auth.APIContext,
        settings: configuration.Settings,
        resource: references.Resource,
        namespace: references.Namespace,
        name: str,
        logger: typedefs.Logger,
) -> bodies.RawBody:
    """
    Read one individual object of a specific resource type.

    Unlike the object listing, the namespaced call is always used
    for the namespaced resources. The errors, including HTTP 404 for
    the absent objects, are escalated to the caller as is.
    """
    rsp: bodies.RawBody = await api.get(
        url=resource.get_url(namespace=namespace, name=name),
        context=context,
        settings=settings,
        logger=logger,
    )
    return rsp
