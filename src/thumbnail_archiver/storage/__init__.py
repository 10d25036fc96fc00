"""Object-storage persistence for archived thumbnails."""
