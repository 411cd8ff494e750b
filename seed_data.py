"""Default portfolio document written on first boot"""
import copy

DEFAULT_PORTFOLIO = {
    'personalInfo': {
        'name': 'Your Name',
        'title': 'Full Stack Developer & UI/UX Designer',
        'bio': 'Passionate developer creating beautiful, functional web experiences with modern technologies.',
        'email': 'hello@example.com',
        'phone': '+1 234 567 8900',
        'location': 'San Francisco, CA',
        'resume': 'resume.pdf',
        'social': {
            'github': 'https://github.com/yourusername',
            'linkedin': 'https://linkedin.com/in/yourusername',
        },
    },
    'skills': [
        {'id': 1, 'name': 'JavaScript', 'percentage': 90, 'category': 'Frontend',
         'description': 'Modern ES6+ JavaScript with async/await and modules', 'icon': 'fab fa-js'},
        {'id': 2, 'name': 'Python', 'percentage': 85, 'category': 'Backend',
         'description': 'Flask, data processing and automation', 'icon': 'fab fa-python'},
        {'id': 3, 'name': 'React', 'percentage': 80, 'category': 'Frontend',
         'description': 'Hooks, context API and component architecture', 'icon': 'fab fa-react'},
        {'id': 4, 'name': 'Git', 'percentage': 80, 'category': 'Tools',
         'description': 'Branching strategies and collaborative development', 'icon': 'fab fa-git-alt'},
    ],
    'projects': [
        {
            'id': 1,
            'title': 'E-Commerce Platform',
            'description': 'A full-stack e-commerce solution with user authentication, payment integration and an admin dashboard.',
            'image': 'static/assets/project-placeholder.svg',
            'technologies': ['React', 'Node.js', 'MongoDB', 'Stripe'],
            'github': 'https://github.com/yourusername/ecommerce',
            'live': 'https://example.com/ecommerce',
            'featured': True,
            'category': 'Full Stack',
        },
        {
            'id': 2,
            'title': 'Weather Dashboard',
            'description': 'A responsive weather dashboard with location-based forecasts and interactive maps.',
            'image': 'static/assets/project-placeholder.svg',
            'technologies': ['JavaScript', 'API Integration', 'Chart.js'],
            'github': 'https://github.com/yourusername/weather',
            'live': 'https://example.com/weather',
            'featured': False,
            'category': 'Frontend',
        },
    ],
    'services': [
        {
            'id': 1,
            'title': 'Web Development',
            'icon': 'fas fa-code',
            'description': 'Custom web applications built with modern technologies.',
            'category': 'Development',
            'features': ['Responsive Design', 'Performance Optimization', 'SEO Friendly'],
            'price': 'Starting at $500',
            'featured': True,
        },
        {
            'id': 2,
            'title': 'UI/UX Design',
            'icon': 'fas fa-paint-brush',
            'description': 'Beautiful and intuitive user interfaces that enhance user experience.',
            'category': 'Design',
            'features': ['User Research', 'Wireframing', 'Prototyping'],
            'price': 'Starting at $300',
            'featured': False,
        },
    ],
    'experience': [
        {
            'company': 'Tech Solutions Inc.',
            'position': 'Senior Full Stack Developer',
            'duration': '2022 - Present',
            'description': 'Leading development of web applications and mentoring junior developers.',
            'technologies': ['React', 'Node.js', 'AWS'],
        },
    ],
    'education': [
        {
            'degree': 'Bachelor of Technology',
            'field': 'Computer Science',
            'institution': 'State University',
            'year': '2016 - 2020',
        },
    ],
}


def default_document():
    """Fresh copy of the seed document, safe to mutate"""
    return copy.deepcopy(DEFAULT_PORTFOLIO)
