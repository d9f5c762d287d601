"""Bundled sample resume, used when no saved document can be restored."""

from __future__ import annotations

from resume_optimizer.models.resume import ResumeDocument

SAMPLE_RESUME: dict = {
    "personalInfo": {
        "firstName": "John",
        "lastName": "Doe",
        "email": "john.doe@example.com",
        "phone": "+1 (555) 123-4567",
        "location": "San Francisco, CA",
        "website": "https://johndoe.dev",
        "linkedin": "https://linkedin.com/in/johndoe",
        "github": "https://github.com/johndoe",
        "summary": (
            "Experienced Software Engineer with 5+ years of expertise in full-stack "
            "development, cloud architecture, and team leadership. Passionate about "
            "building scalable applications and mentoring junior developers."
        ),
    },
    "workExperience": [
        {
            "id": "1",
            "company": "Tech Corp",
            "position": "Senior Software Engineer",
            "location": "San Francisco, CA",
            "startDate": "2022-01",
            "endDate": "",
            "isCurrentRole": True,
            "description": "Lead development of microservices architecture serving 10M+ users daily.",
            "highlights": [
                "Reduced API response time by 40% through optimization and caching strategies",
                "Led a team of 4 engineers to deliver 3 major features ahead of schedule",
                "Implemented CI/CD pipelines reducing deployment time from 2 hours to 15 minutes",
            ],
            "visible": True,
        },
        {
            "id": "2",
            "company": "StartupXYZ",
            "position": "Full Stack Developer",
            "location": "San Francisco, CA",
            "startDate": "2020-06",
            "endDate": "2021-12",
            "isCurrentRole": False,
            "description": "Developed and maintained web applications using React, Node.js, and PostgreSQL.",
            "highlights": [
                "Built responsive web application from scratch with 95% test coverage",
                "Integrated third-party APIs reducing manual data entry by 80%",
                "Collaborated with design team to improve user experience and increase engagement by 25%",
            ],
            "visible": True,
        },
    ],
    "education": [
        {
            "id": "1",
            "institution": "University of California, Berkeley",
            "degree": "Bachelor of Science",
            "field": "Computer Science",
            "location": "Berkeley, CA",
            "startDate": "2016-08",
            "endDate": "2020-05",
            "gpa": "3.8/4.0",
            "honors": "Magna Cum Laude, Dean's List (6 semesters)",
            "visible": True,
        },
    ],
    "skills": [
        {
            "id": "1",
            "category": "Programming Languages",
            "skills": ["JavaScript", "TypeScript", "Python", "Java", "Go"],
            "visible": True,
        },
        {
            "id": "2",
            "category": "Frontend Technologies",
            "skills": ["React", "Vue.js", "HTML5", "CSS3", "Tailwind CSS"],
            "visible": True,
        },
        {
            "id": "3",
            "category": "Backend & Cloud",
            "skills": ["Node.js", "PostgreSQL", "Redis", "AWS", "Docker"],
            "visible": True,
        },
    ],
    "projects": [
        {
            "id": "1",
            "name": "Open Source Task Manager",
            "description": "Collaborative task management app with real-time updates and offline support.",
            "technologies": ["React", "Node.js", "WebSocket", "PostgreSQL"],
            "startDate": "2023-03",
            "url": "https://github.com/johndoe/task-manager",
            "visible": True,
        },
    ],
}


def sample_resume() -> ResumeDocument:
    return ResumeDocument.model_validate(SAMPLE_RESUME)
