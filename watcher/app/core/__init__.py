SERVICE_NAME = "watcher"
