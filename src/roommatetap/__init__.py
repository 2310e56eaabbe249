"""RoommateTap runtime configuration."""
