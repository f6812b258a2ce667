# Import every model so Base.metadata is complete for create_all and Alembic.
from quotebroker.models.profile import Profile  # noqa: F401
from quotebroker.models.project import Project  # noqa: F401
from quotebroker.models.quote import Quote  # noqa: F401
from quotebroker.models.access_request import AccessRequest  # noqa: F401
from quotebroker.models.registered_email import RegisteredEmail  # noqa: F401
