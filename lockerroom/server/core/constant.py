PROJECT_NAME = "LockerRoom"
API_V1_STR = "/api/v1"
