"""
Version 1 HTTP endpoints, one router per principal kind plus public browsing:
- workers: gig and machine applications, dashboard
- startups: gig management, received gig applications, machine applications
- manufacturers: machine management, received machine applications
- public: unauthenticated gig and machine browsing
"""
