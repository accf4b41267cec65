"""Let's Go Party event listing backend."""
