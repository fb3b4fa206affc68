"""Core of samhook: error taxonomy, retry policies, cancellation and logging."""
