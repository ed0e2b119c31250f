PROJECT_NAME = "taskgate"
API_V1_STR = "/api/v1"
