"""
Seed records served by the in-memory repositories.
"""

AVATAR_URL = "https://via.placeholder.com/150x150/FFB7C5/FFFFFF?text={initials}"

STUDENTS = [
    {
        "_id": "s1",
        "name": "María García",
        "email": "maria@example.com",
        "avatar": AVATAR_URL.format(initials="MG"),
        "bio": "Frontend developer passionate about React",
        "currentLevel": "Intermediate",
        "totalSakuraPoints": 150,
        "skills": [
            {"name": "React", "level": 4},
            {"name": "JavaScript", "level": 4},
            {"name": "CSS", "level": 3},
        ],
    },
    {
        "_id": "s2",
        "name": "Carlos López",
        "email": "carlos@example.com",
        "avatar": AVATAR_URL.format(initials="CL"),
        "bio": "Backend developer focused on APIs",
        "currentLevel": "Advanced",
        "totalSakuraPoints": 200,
        "skills": [
            {"name": "Node.js", "level": 5},
            {"name": "MongoDB", "level": 4},
            {"name": "Express", "level": 5},
        ],
    },
]

PROJECTS = [
    {
        "_id": "1",
        "title": "Vintage E-commerce",
        "description": "Online store with a retro look",
        "technologies": ["React", "Node.js", "MongoDB"],
        "difficulty": "Intermediate",
        "season": "Summer",
        "status": "Completed",
        "featured": True,
        "sakuraPoints": 75,
        "students": [
            {"_id": "s1", "name": "María García", "avatar": AVATAR_URL.format(initials="MG")},
        ],
    },
    {
        "_id": "2",
        "title": "Library API",
        "description": "Book management system",
        "technologies": ["Node.js", "Express", "MySQL"],
        "difficulty": "Advanced",
        "season": "Autumn",
        "status": "In Progress",
        "featured": False,
        "sakuraPoints": 50,
        "students": [
            {"_id": "s2", "name": "Carlos López", "avatar": AVATAR_URL.format(initials="CL")},
        ],
    },
]
