# Encoding helpers
