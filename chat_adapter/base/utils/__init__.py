"""Pure helpers shared by the request and response paths."""
