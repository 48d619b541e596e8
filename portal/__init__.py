"""Login portal: form and REST login in front of a user directory."""
