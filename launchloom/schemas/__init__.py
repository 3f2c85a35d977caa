from .playbooks import (
    ErrorResponse,
    HealthResponse,
    LaunchForm,
    PlaybookRequest,
    ProForm,
    StandardForm,
)
