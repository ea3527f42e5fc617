"""Domain libraries: locations, validation and external collaborators."""
