"""
Demo data loaded into a fresh store by ``init_db``.

Records use the internal (snake_case) field names.  ``updated_at`` is
stamped at load time; user passwords are hashed at load time.
"""

USERS = [
    {
        "id": "1",
        "email": "coach@fitcoachpro.com",
        "password": "coach123",
        "role": "coach",
        "name": "John Coach",
        "avatar": None,
        "last_login": None,
        "is_active": True,
        "profile": {
            "specialization": "Weight Training",
            "experience": "5 years",
            "certifications": ["NASM", "ACE"],
        },
    },
    {
        "id": "2",
        "email": "admin@fitcoachpro.com",
        "password": "admin123",
        "role": "admin",
        "name": "Admin User",
        "avatar": None,
        "last_login": None,
        "is_active": True,
        "profile": {"department": "Platform Management", "permissions": ["all"]},
    },
]

COACHES = [
    {
        "id": "1",
        "owner_id": "1",
        "name": "John Coach",
        "email": "coach@fitcoachpro.com",
        "specialization": "Weight Training",
        "experience": "5 years",
        "certifications": ["NASM", "ACE"],
        "avatar": None,
        "bio": "Experienced personal trainer specializing in strength training and body composition.",
        "schedule": {
            "monday": {"start": "06:00", "end": "20:00", "available": True},
            "tuesday": {"start": "06:00", "end": "20:00", "available": True},
            "wednesday": {"start": "06:00", "end": "20:00", "available": True},
            "thursday": {"start": "06:00", "end": "20:00", "available": True},
            "friday": {"start": "06:00", "end": "18:00", "available": True},
            "saturday": {"start": "08:00", "end": "16:00", "available": True},
            "sunday": {"start": "10:00", "end": "14:00", "available": False},
        },
        "status": "active",
        "created_at": "2024-01-15T08:00:00Z",
    }
]

CLIENTS = [
    {
        "id": "1",
        "owner_id": "1",
        "name": "Sarah Johnson",
        "email": "sarah.johnson@email.com",
        "phone": "+1-555-0123",
        "date_of_birth": "1990-05-15",
        "avatar": None,
        "status": "active",
        "join_date": "2024-01-15T08:00:00Z",
        "goals": ["Weight Loss", "Strength Building"],
        "fitness_level": "intermediate",
        "medical_notes": "No known allergies or conditions",
        "emergency_contact": {"name": "John Johnson", "phone": "+1-555-0124", "relationship": "Spouse"},
        "measurements": {"height": 165, "weight": 68, "body_fat": 22, "last_updated": "2024-10-15T08:00:00Z"},
        "preferences": {
            "workout_time": "morning",
            "workout_duration": 60,
            "intensity": "high",
            "workout_types": ["strength", "cardio"],
        },
        "progress": {
            "sessions_completed": 45,
            "total_hours": 67.5,
            "average_rating": 4.8,
            "last_session": "2024-10-28T09:00:00Z",
        },
        "created_at": "2024-01-15T08:00:00Z",
    },
    {
        "id": "2",
        "owner_id": "1",
        "name": "Mike Wilson",
        "email": "mike.wilson@email.com",
        "phone": "+1-555-0125",
        "date_of_birth": "1985-08-22",
        "avatar": None,
        "status": "active",
        "join_date": "2024-02-01T08:00:00Z",
        "goals": ["Muscle Building", "Athletic Performance"],
        "fitness_level": "advanced",
        "medical_notes": "Previous knee injury - avoid high impact exercises",
        "emergency_contact": {"name": "Lisa Wilson", "phone": "+1-555-0126", "relationship": "Spouse"},
        "measurements": {"height": 180, "weight": 85, "body_fat": 15, "last_updated": "2024-10-20T08:00:00Z"},
        "preferences": {
            "workout_time": "evening",
            "workout_duration": 75,
            "intensity": "high",
            "workout_types": ["strength", "flexibility"],
        },
        "progress": {
            "sessions_completed": 38,
            "total_hours": 57,
            "average_rating": 4.9,
            "last_session": "2024-10-29T18:00:00Z",
        },
        "created_at": "2024-02-01T08:00:00Z",
    },
    {
        "id": "3",
        "owner_id": "1",
        "name": "Emma Davis",
        "email": "emma.davis@email.com",
        "phone": "+1-555-0127",
        "date_of_birth": "1992-12-10",
        "avatar": None,
        "status": "active",
        "join_date": "2024-03-10T08:00:00Z",
        "goals": ["Weight Loss", "Flexibility"],
        "fitness_level": "beginner",
        "medical_notes": "Asthma - keep inhaler nearby",
        "emergency_contact": {"name": "Robert Davis", "phone": "+1-555-0128", "relationship": "Father"},
        "measurements": {"height": 160, "weight": 72, "body_fat": 28, "last_updated": "2024-10-10T08:00:00Z"},
        "preferences": {
            "workout_time": "afternoon",
            "workout_duration": 45,
            "intensity": "moderate",
            "workout_types": ["cardio", "flexibility"],
        },
        "progress": {
            "sessions_completed": 28,
            "total_hours": 35,
            "average_rating": 4.6,
            "last_session": "2024-10-27T14:00:00Z",
        },
        "created_at": "2024-03-10T08:00:00Z",
    },
]

WORKOUTS = [
    {
        "id": "1",
        "owner_id": "1",
        "client_id": "1",
        "client_name": "Sarah Johnson",
        "title": "Upper Body Strength",
        "type": "strength",
        "date": "2024-11-01",
        "time": "09:00",
        "duration": 60,
        "status": "scheduled",
        "location": "Gym Floor A",
        "exercises": [
            {"name": "Bench Press", "sets": 3, "reps": 10, "weight": 60, "rest_time": 90},
            {"name": "Rows", "sets": 3, "reps": 12, "weight": 50, "rest_time": 60},
            {"name": "Shoulder Press", "sets": 3, "reps": 8, "weight": 30, "rest_time": 90},
        ],
        "notes": "Focus on form and controlled movements",
        "created_at": "2024-10-28T08:00:00Z",
    },
    {
        "id": "2",
        "owner_id": "1",
        "client_id": "2",
        "client_name": "Mike Wilson",
        "title": "Leg Day Power",
        "type": "strength",
        "date": "2024-11-01",
        "time": "11:00",
        "duration": 75,
        "status": "scheduled",
        "location": "Gym Floor B",
        "exercises": [
            {"name": "Squats", "sets": 4, "reps": 8, "weight": 100, "rest_time": 120},
            {"name": "Deadlifts", "sets": 3, "reps": 6, "weight": 120, "rest_time": 180},
            {"name": "Leg Press", "sets": 3, "reps": 12, "weight": 200, "rest_time": 90},
        ],
        "notes": "Watch knee positioning during squats",
        "created_at": "2024-10-29T08:00:00Z",
    },
    {
        "id": "3",
        "owner_id": "1",
        "client_id": "3",
        "client_name": "Emma Davis",
        "title": "Cardio & Flexibility",
        "type": "cardio",
        "date": "2024-11-01",
        "time": "14:00",
        "duration": 45,
        "status": "scheduled",
        "location": "Cardio Area",
        "exercises": [
            {"name": "Treadmill", "duration": 20, "intensity": "moderate", "notes": "Keep heart rate at 140-150 bpm"},
            {"name": "Stretching Routine", "duration": 15, "intensity": "low", "notes": "Focus on hamstrings and hip flexors"},
            {"name": "Cool Down Walk", "duration": 10, "intensity": "low", "notes": "Gradual heart rate reduction"},
        ],
        "notes": "Remember to keep inhaler nearby",
        "created_at": "2024-10-30T08:00:00Z",
    },
]

WORKOUT_TEMPLATES = [
    {
        "id": "1",
        "name": "Upper Body Strength",
        "type": "strength",
        "duration": 60,
        "exercises": [
            {"name": "Bench Press", "sets": 3, "reps": 10, "rest_time": 90},
            {"name": "Rows", "sets": 3, "reps": 12, "rest_time": 60},
            {"name": "Shoulder Press", "sets": 3, "reps": 8, "rest_time": 90},
            {"name": "Pull-ups", "sets": 3, "reps": 6, "rest_time": 120},
        ],
    },
    {
        "id": "2",
        "name": "HIIT Cardio",
        "type": "cardio",
        "duration": 30,
        "exercises": [
            {"name": "Burpees", "duration": 30, "rest_time": 30},
            {"name": "Mountain Climbers", "duration": 30, "rest_time": 30},
            {"name": "Jump Squats", "duration": 30, "rest_time": 30},
            {"name": "High Knees", "duration": 30, "rest_time": 30},
        ],
    },
    {
        "id": "3",
        "name": "Flexibility & Mobility",
        "type": "flexibility",
        "duration": 45,
        "exercises": [
            {"name": "Dynamic Warm-up", "duration": 10},
            {"name": "Hip Flexor Stretch", "duration": 60, "sets": 2},
            {"name": "Hamstring Stretch", "duration": 60, "sets": 2},
            {"name": "Shoulder Mobility", "duration": 60, "sets": 2},
        ],
    },
]
