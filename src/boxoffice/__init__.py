"""Box office: screening scheduling and seat reservations for a multi-room cinema."""
