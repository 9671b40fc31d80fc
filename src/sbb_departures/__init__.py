"""Live departure board for the Muhen - Aarau - Zürich HB corridor."""
