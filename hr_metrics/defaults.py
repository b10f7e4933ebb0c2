DEFAULT_CONFIG = {
    'spreadsheet': {
        'id': '1Y-koc05vPSjUJqZlo9N759GO69f2UucugFEbnuBJ4BM',
        'format': 'csv',
        'gid': 0,
        'refreshInterval': 5 * 60,
        'cacheTtl': 5 * 60,
        'timeout': 30,
    },
    'debounce': 0.25,
    'rates': {
        'victoria': 16.50,
        'kyle': 20.00,
        'brooke': 25.00,
        'melanie': 25.00,
        'austin': 35.00,
        'default': 25.00,
    },
    'employees': ['victoria', 'kyle', 'brooke', 'melanie', 'austin'],
    'categories': {
        'Business Development': [
            'BD - Research',
            'BD - Emailing',
            'BD - Calls',
            'BD - Internal Call',
        ],
        'Congress': [
            'Congress - Research',
            'Congress - Emailing',
            'Congress - Calls',
            'Congress - Internal Call',
        ],
        'Social Media': [
            'Social Management',
            'Social Content - Research',
            'Social Content - Scripting',
            'Social Content - Recording',
            'Social Content - Video Editing',
            'Social Content - Graphic Design',
            'Social - Internal Call',
        ],
        'Influencer': [
            'Influencer Outreach',
            'Influencer - Internal Call',
        ],
        'Newsletter': [
            'Newsletter - Writing/Editing',
            'Newsletter - Operations',
            'Newsletter - Internal Call',
        ],
        'Miscellaneous': [
            'Misc. Content',
            'Misc. Research',
        ],
        'Internal Operations': [
            'Internal Meetings',
            'Admin',
            'Operations',
            'Customer Support',
        ],
        'Advertising': [
            'Ads',
        ],
    },
    'categoryColors': {
        'Business Development': '#4CAF50',
        'Congress': '#2196F3',
        'Social Media': '#FFC107',
        'Influencer': '#9C27B0',
        'Newsletter': '#FF5722',
        'Miscellaneous': '#607D8B',
        'Internal Operations': '#795548',
        'Advertising': '#E91E63',
    },
    'employeeColors': {
        'victoria': '#4CAF50',
        'kyle': '#2196F3',
        'brooke': '#FFC107',
        'melanie': '#9C27B0',
        'austin': '#F44336',
    },
}
