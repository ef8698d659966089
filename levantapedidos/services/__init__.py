"""Service facades between the web layer and the domain engine."""
