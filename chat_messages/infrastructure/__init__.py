"""Infrastructure layer: storage backends, resolvers and wiring."""
