"""Lost & found matching and claim verification."""
