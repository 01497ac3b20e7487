"""Business logic: authentication, Google sign-in, watchlists."""
