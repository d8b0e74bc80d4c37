"""RSS/Atom feed renderer."""
