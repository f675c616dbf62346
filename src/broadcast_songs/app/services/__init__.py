"""Services for the Broadcast Songs app."""
