"""Service-wide identifiers shared by every module that logs."""

SERVICE_NAME = "embed"
