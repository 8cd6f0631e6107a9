# Core infrastructure: config, errors, HTTP transport
