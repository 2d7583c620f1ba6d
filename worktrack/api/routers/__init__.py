"""HTTP routers mounted under the ``/api`` prefix."""
