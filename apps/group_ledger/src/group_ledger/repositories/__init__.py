"""Read repositories feeding the settlement collaborators."""
