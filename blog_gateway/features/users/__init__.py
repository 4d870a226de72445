"""Users and the subscription edges between them."""
