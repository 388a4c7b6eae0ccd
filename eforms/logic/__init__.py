"""Form schema interpreters (builder, filler, analytics) and backend repositories."""
