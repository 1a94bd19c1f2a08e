"""classroll — enrollment platform REST backend."""
