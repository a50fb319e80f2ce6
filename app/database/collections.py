# Collection Names
COLLECTIONS = {
    'complaints': 'complaints',
    'users': 'users',
}

# Collection Structure Documentation
COLLECTION_SCHEMAS = {
    'complaints': {
        'fields': ['complaintId', 'complaintDate', 'machineName', 'complaintDescription', 'priority', 'complaintStatus', 'department', 'assignedTo', 'actionDate', 'maintenanceRemarks', 'initialInspectionDate', 'estimatedEndDate', 'finalizationDate', 'materialsUsed', 'createdBy', 'history'],
        'required': ['complaintId', 'machineName', 'complaintDescription', 'priority', 'department', 'createdBy', 'history'],
        'indexes': ['complaintId', 'createdBy', 'complaintStatus', 'priority', 'department']
    },
    'users': {
        'fields': ['email', 'role', 'displayName'],
        'required': ['role'],
        'indexes': ['role', 'email']
    },
}
