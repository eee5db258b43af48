"""ContentKosh API: multi-tenant educational administration backend."""
