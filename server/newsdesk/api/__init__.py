from newsdesk.api.routes import HttpApiServer, create_app

__all__ = ["HttpApiServer", "create_app"]
